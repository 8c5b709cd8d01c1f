from setuptools import setup, find_packages

setup(
    name="sports-near-me",
    version="0.1.0",
    description="Sports Near Me backend – find athletics events near a ZIP or city",
    package_dir={"": "backend"},
    packages=find_packages(where="backend"),
    python_requires=">=3.10",
    install_requires=[
        "httpx>=0.23",
        "fastapi>=0.95",
        "uvicorn>=0.22",
        "python-dotenv>=1.0",
        "slowapi>=0.1.9",
        # geopy / python-opensky / beautifulsoup4 / pywebpush dropped – no
        # remote geocoding, flight tracking, HTML scraping or push here
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "pytest-httpx>=0.23",
        ],
        "lint": [
            "black>=23.0",
            "flake8>=6.0",
        ],
    },
)
