"""
Wrapper script for running the server with profiling support.

This script is used by Scalene to profile the application.
"""

if __name__ == "__main__":
    import uvicorn

    from chat_relay.settings import app_settings

    uvicorn.run(
        "chat_relay:application",
        factory=True,
        host=app_settings.HOST,
        port=app_settings.PORT,
    )
