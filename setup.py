from setuptools import setup, find_packages

setup(
    name="pinscope",
    version="1.0.2",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    include_package_data=True,
    install_requires=[
        "fastapi>=0.104.0",
        "uvicorn[standard]>=0.24.0",
        "pydantic>=2.5.0",
        "playwright>=1.40.0",
        "click>=8.1.7",
        "rich>=13.7.0",
        "psutil>=5.9.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pinscope=main:cli",
        ],
    },
    python_requires=">=3.10",
    author="pinscope",
    description="Pinterest image search API backed by a headless browser",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
