# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="pkgshadow",
    version="0.1.0",
    description="Shadow-tree generator exposing nested monorepo packages under short import paths",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["pkgshadow*"]),
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'pkgshadow=pkgshadow.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
