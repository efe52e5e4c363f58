"""Install the artist manager package."""

from setuptools import setup, find_packages

setup(
    name='artist-manager',
    version='0.1.0',
    packages=find_packages(exclude=['*tests*']),
    python_requires='>=3.9',
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "pydantic[email]>=2",
        "pyjwt",
        "bcrypt",
        "python-json-logger",
    ],
    extras_require={
        'mysql': ["mysqlclient"],
        'test': ["pytest", "httpx"],
    },
    zip_safe=False
)
