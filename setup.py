#!/usr/bin/env python
import os

from setuptools import setup

here = os.path.abspath(os.path.dirname(__file__))


def read_requirements():
    import ssl

    requires = []

    # Workaround for python3.9 on macOS which is compiled with LibreSSL
    # See https://github.com/urllib3/urllib3/issues/3020
    if not ssl.OPENSSL_VERSION.startswith("OpenSSL "):
        requires.append("urllib3<2.0.0")

    with open(os.path.join(here, "requirements.txt")) as fp:
        requires.extend([row.strip() for row in fp if row.strip()])

    return requires


about = {}
with open(os.path.join(here, "multiio", "__init__.py"), "r") as f:
    exec(f.read(), about)


def readme():
    with open(os.path.join(here, "README.md")) as f:
        return f.read()


setup(
    name="multiio",
    version=about["VERSION"],
    description="Read many sized byte sources as one seekable stream",
    long_description=readme(),
    long_description_content_type="text/markdown",
    license="BSD",
    python_requires=">=3.8",
    packages=[
        "multiio",
        "multiio.commands",
    ],
    entry_points="""
      [console_scripts]
      multiio=multiio.commands.__main__:main
      """,
    install_requires=read_requirements(),
    extras_require={"test": ["pytest"]},
)
