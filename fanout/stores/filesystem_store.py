import asyncio
import pathlib


class FilesystemStore:
    """
    Writes objects as files below a root directory, using the object key
    as the relative path. Used to run a fan-out locally without S3.
    """

    def __init__(self, directory: str) -> None:
        self.directory = pathlib.Path(directory)

    async def put(self, key: str, content: bytes) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None,
            self._write,
            key,
            content,
        )

    def to_path(self, key: str) -> pathlib.Path:
        root = self.directory.resolve()
        path = (root / key).resolve()

        # Keys embed the request's Host header, which may contain "../".
        if not path.is_relative_to(root) or path == root:
            raise ValueError(f"Key {key!r} resolves outside {root}")

        return path

    def _write(self, key: str, content: bytes):
        path = self.to_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "xb") as output:
            output.write(content)

    async def close(self) -> None:
        pass
