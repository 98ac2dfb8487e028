"""
List competitions and their data files
"""
import asyncio
from kagglepy import KaggleClient, Authentication, CompetitionsList


async def main():
    # Credentials from ~/.kaggle/kaggle.json
    async with KaggleClient(Authentication.default()) as kaggle:

        competitions = await kaggle.competitions_list(CompetitionsList(search="titanic"))
        for competition in competitions:
            print(f"{competition['ref']}: {competition.get('title', '')}")

        files = await kaggle.competitions_data_list_files("titanic")
        for item in files:
            print(f"  {item['name']} ({item.get('totalBytes', '?')} bytes)")

        # Downloads go to a temporary directory unless one is configured
        archive = await kaggle.competitions_data_download_files("titanic")
        print(f"Downloaded: {archive}")


if __name__ == "__main__":
    asyncio.run(main())
