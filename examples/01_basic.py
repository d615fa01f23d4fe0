"""
Basic usage - List a directory
"""
import asyncio
from davpy import DavClient


async def main():
    async with DavClient("http://192.168.4.1") as dav:

        view = await dav.ls("/")
        print(" / ".join(crumb.label for crumb in view.breadcrumbs))

        for row in view.rows:
            suffix = "/" if row.is_dir else ""
            print(f"  {row.name}{suffix}")


if __name__ == "__main__":
    asyncio.run(main())
