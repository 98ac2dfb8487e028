"""
Submit a file to a competition
"""
import asyncio
from kagglepy import KaggleClient, Authentication, RateLimitedError


async def main():
    def on_progress(progress):
        print(f"Progress: {progress.percentage:.1f}%")

    client = (
        KaggleClient.builder()
        .auth(Authentication.env())  # KAGGLE_USERNAME / KAGGLE_KEY
        .progress(on_progress)
        .build()
    )

    async with client as kaggle:
        try:
            result = await kaggle.competition_submit("submission.csv", "titanic", "baseline")
            print(f"Submitted: {result}")
        except RateLimitedError as e:
            print(f"Slow down: retry in {e.retry_after or '?'} seconds")


if __name__ == "__main__":
    asyncio.run(main())
