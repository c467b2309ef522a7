import re
from setuptools import setup, find_packages

with open("./README.md", "r") as f:
    description = f.read()

with open("./requirements.txt", 'r') as f:
    requirements = f.read().split()

# read without importing, the package needs numpy at import time
with open("./pyrubik/__init__.py", 'r') as f:
    source = f.read()
version = re.search(r'__version__ = "(.+)"', source).group(1)
author = re.search(r'__author__ = "(.+)"', source).group(1)

setup(
    name="pyrubik",
    version=version,
    author=author,
    description="Rubik's cubes of any size in Python, with a layer by layer 3x3 solver",
    long_description=description,
    long_description_content_type="text/markdown",
    license='MIT',
    packages=find_packages(include=["pyrubik", "pyrubik.*"]),
    python_requires='>=3.10',
    include_package_data=True,
    install_requires=requirements,
    extras_require={"test": ["pytest"]}
)
