"""
Upload files with progress
"""
import asyncio
import sys
from davpy import DavClient


async def main():
    files = sys.argv[1:] or ["README.txt"]

    async with DavClient("http://192.168.4.1") as dav:
        dav.on('upload_progress', lambda p: print(f"{p.name}: {p.percentage:.0f}%"))
        dav.on('upload_failed', lambda task: print(f"{task.name} failed: {task.error}"))

        await dav.ls("/uploads")
        batch = await dav.upload(*files)

        print(f"{len(batch.succeeded)} uploaded, {len(batch.failed)} failed")
        print("Now in /uploads:", dav.view.names())


if __name__ == "__main__":
    asyncio.run(main())
