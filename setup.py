from setuptools import setup, find_packages

setup(
    name="clauseflags",
    version="0.1.0",
    description="Clause-based command-line parser with shell completion for data tools.",
    long_description=open("README.md", encoding="UTF-8").read(),
    long_description_content_type="text/markdown",
    author="Roland Thomas Jr",
    author_email="roland@rtj.dev",
    packages=find_packages(include=["clauseflags", "clauseflags.*"]),
    python_requires=">=3.10",
    install_requires=[
        "rich>=13",
        "prompt_toolkit>=3",
        "pydantic>=2",
        "pyyaml",
        "toml",
        "python-dateutil",
        "python-json-logger>=3.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Development Status :: 3 - Alpha",
    ],
)
