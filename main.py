"""
Entry Point for the Recipe Clipper API

Runs the FastAPI service that the iOS share extension calls to turn Instagram,
Facebook and recipe site links into structured recipes.
"""

from dotenv import load_dotenv

load_dotenv()

from recipe_clipper.config import configure_logfire, settings

if __name__ == "__main__":
    print("🚂 Starting Recipe Clipper API...")

    import uvicorn

    configure_logfire()

    uvicorn.run(
        "recipe_clipper.api:app",
        host="0.0.0.0",
        port=settings.port,
        workers=1,
        log_level="info"
    )
