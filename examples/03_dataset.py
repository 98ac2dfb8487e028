"""
Create a dataset from a folder
"""
import asyncio
import logging
from kagglepy import KaggleClient, Authentication, ArchiveMode, setup_logging


async def main():
    logging.basicConfig()
    setup_logging(logging.DEBUG)

    async with KaggleClient(Authentication.config_file("~/.kaggle/kaggle.json")) as kaggle:

        # The folder holds dataset-metadata.json next to the data files.
        # Sub-directories are packed into one archive each before upload.
        result = await kaggle.dataset_create_new(
            "./my-dataset",
            public=False,
            archive_mode=ArchiveMode.ZIP
        )
        print(f"Created: {result.get('url')}")

        # Later, push a new version of the same folder
        result = await kaggle.dataset_create_version("./my-dataset", "Add 2024 data")
        print(f"Version: {result}")


if __name__ == "__main__":
    asyncio.run(main())
