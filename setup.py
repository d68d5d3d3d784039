from pathlib import Path
from setuptools import setup, find_packages

ROOT = Path(__file__).parent
README = (ROOT / "README.md").read_text(encoding="utf-8")  # markdown is more common

setup(
    name="firegit",
    version="0.1.0",
    description="Asynchronous Firestore-like document database stored in a GitHub repository",
    long_description=README,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(exclude=("tests", "tests.*", "examples")),
    include_package_data=True,           # include py.typed
    package_data={"firegit": ["py.typed"]},
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=1.10,<3.0.0",
        "packaging",
        "httpx>=0.24",
    ],
    extras_require={
        "dev": ["black", "ruff", "pytest", "pytest-asyncio"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Framework :: AsyncIO",
        "Topic :: Database :: Front-Ends",
        "Typing :: Typed",
    ],
    keywords=[
        "github",
        "firestore",
        "document database",
        "pydantic",
        "asyncio",
    ],
)
