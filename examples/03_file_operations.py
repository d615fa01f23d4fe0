"""
File operations - rename, move, delete, create folder

The controller asks a prompter for names and confirmations; this one
answers from a script.
"""
import asyncio
from davpy import Action, DavClient


class ScriptedPrompter:
    def __init__(self, *answers):
        self.answers = list(answers)

    async def confirm(self, message):
        print(message)
        return True

    async def prompt(self, message, default=''):
        answer = self.answers.pop(0) if self.answers else default
        print(f"{message} {answer}")
        return answer


async def main():
    prompter = ScriptedPrompter("archive", "notes-old.txt", "/archive/")

    async with DavClient("http://192.168.4.1", prompter=prompter) as dav:
        dav.on('error', lambda error: print(f"Error: {error}"))
        controller = dav.controller

        await dav.ls("/")
        await controller.create_directory()
        await controller.dispatch("notes.txt", Action.RENAME)
        await controller.dispatch("notes-old.txt", Action.MOVE)

        result = await controller.navigate("/archive/")
        if result.ok:
            await controller.dispatch("notes-old.txt", Action.DELETE)
            print("Remaining:", dav.view.names())


if __name__ == "__main__":
    asyncio.run(main())
