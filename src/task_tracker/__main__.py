import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "task_tracker.app.main:create_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "5000")),
        # we emit our own access log
        access_log=False,
    )


if __name__ == "__main__":
    main()
