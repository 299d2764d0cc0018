from setuptools import setup, find_packages

setup(
    name="question-leakage",
    version="0.1.0",
    description="Scores whether generated retrieval questions leak the answers to their target claims",
    author="Sumit Asthana",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    py_modules=["cli", "pipeline_runner"],
    package_data={"config": ["*.yaml"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "anthropic>=0.25",
        "httpx>=0.25",
        "pydantic>=2.0",
        "python-dotenv>=1.0",
        "pyyaml>=6.0",
        "structlog>=23.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "leakage-scorer=cli:main",
        ],
    },
)
