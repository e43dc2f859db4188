from os import path

from setuptools import setup

this_dir = path.abspath(path.dirname(__file__))
with open(path.join(this_dir, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="FastRepo",
    description="FastRepo - generic repository and unit of work for SQLAlchemy applications",
    long_description=long_description,
    long_description_content_type="text/markdown",
    version="0.1",
    license="MIT",
    packages=["fastrepo", "fastrepo.core", "fastrepo.test"],
    package_data={
        "fastrepo": ["py.typed"],
        "fastrepo.core": ["py.typed"],
        "fastrepo.test": ["py.typed"],
    },
    keywords=["fastrepo", "repository", "unit-of-work", "sqlalchemy", "pydantic"],
    python_requires=">=3.9",
    install_requires=[
        "sqlalchemy>=2.0",
        "pydantic>=2.0",
        "uvicorn",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Database",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
    ],
)
