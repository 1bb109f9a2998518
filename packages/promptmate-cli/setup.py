"""Setup configuration for promptmate-cli"""
from setuptools import setup, find_packages

setup(
    name="promptmate-cli",
    version="0.1.0",
    description="CLI tools for PromptMate administration and maintenance",
    packages=find_packages(exclude=["tests"]),
    install_requires=[
        "click>=8.1.7",
        "python-dotenv>=1.0.0",
        "httpx>=0.27.0",
        "alembic>=1.13.1",
        "sqlalchemy[asyncio]>=2.0.25",
        "asyncpg>=0.29.0",
        "uvicorn[standard]>=0.27.0",
    ],
    entry_points={
        "console_scripts": [
            "promptmate=promptmate_cli.cli:cli",
        ],
    },
    python_requires=">=3.9",
)
