# run.py
"""
Start the resolver API with uvicorn.

    python run.py            → http://127.0.0.1:3030
    PORT=8080 python run.py  → overrides settings.port
"""
import sys
import asyncio


def _server():
    # Playwright spawns a driver subprocess; Windows needs the Proactor loop
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())

    import uvicorn
    from pricematch.config import settings

    print(f"📡  Server → http://{settings.host}:{settings.port}")
    uvicorn.run(
        "pricematch.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    _server()
