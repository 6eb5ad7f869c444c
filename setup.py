from setuptools import setup, find_namespace_packages

CORE_DEPS = [
    "fastapi",
    "uvicorn",
    "requests",
    "python-dotenv",
    "beautifulsoup4",
    "lxml",
    "yt-dlp",
]

TEST_DEPS = [
    "pytest",
    "httpx",
]

setup(
    name="vidlink",
    version="0.1.0",
    packages=find_namespace_packages(include=["vidlink", "vidlink.*"]),
    python_requires=">=3.8",
    install_requires=CORE_DEPS,
    extras_require={
        "test": TEST_DEPS,
    },
    entry_points={
        "console_scripts": [
            "vidlink=vidlink.main:main",
        ],
    },
)
