"""
Download a file and build the editor link
"""
import asyncio
from davpy import DavClient, DavConfig


async def main():
    config = DavConfig(base_url="http://192.168.4.1", root="/dav")

    async with DavClient(config=config, launch="?dir=/www") as dav:
        await dav.start()

        saved = await dav.download("index.html", ".")
        print(f"Saved to {saved}")

        print("Edit at:", config.resolve(dav.controller.edit_url("index.html")))
        print("Direct link:", dav.api.download_url("/www/index.html"))


if __name__ == "__main__":
    asyncio.run(main())
