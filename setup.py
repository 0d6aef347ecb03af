import os

from setuptools import setup, find_packages

setup(
    name="jobboard",
    version="0.1.0",
    packages=find_packages("src"),
    package_dir={"": "src"},
    install_requires=[
        "fastapi>=0.100.0",
        "uvicorn>=0.15.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=0.19.0",
        "aiosqlite>=0.17.0",
        "requests>=2.26.0",
        "python-multipart>=0.0.6",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.24.0",
        ],
    },
    python_requires=">=3.8",
    description="A job board service with applications and admin job management",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    entry_points={
        "console_scripts": [
            "jobboard-api=jobboard.api.main:main",
        ],
    },
)
