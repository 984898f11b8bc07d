"""sessh-python lives at <https://github.com/sessh/sessh-python>.

sessh
-----

Typed Python client for persistent SSH + tmux sessions managed by sessh.

"""
import pathlib

from setuptools import find_packages, setup

here = pathlib.Path(__file__).parent

about = {}
exec((here / "src" / "sessh" / "__about__.py").read_text(encoding="utf-8"), about)

tests_reqs = [
    line
    for line in (here / "requirements" / "test.txt").read_text(encoding="utf-8").splitlines()
    if line and not line.startswith("#")
]

otel_reqs = [
    "opentelemetry-api",
    "opentelemetry-sdk",
    "opentelemetry-exporter-otlp-proto-http",
]

readme = (here / "README.md").read_text(encoding="utf-8")


setup(
    name=about["__package_name__"],
    version=about["__version__"],
    url=about["__github__"],
    download_url=about["__pypi__"],
    project_urls={
        "Documentation": about["__docs__"],
        "Code": about["__github__"],
        "Issue tracker": about["__tracker__"],
        "Changes": about["__changes__"],
    },
    license=about["__license__"],
    author=about["__author__"],
    author_email=about["__email__"],
    description=about["__description__"],
    long_description=readme,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=["typing-extensions; python_version < '3.11'"],
    extras_require={
        "otel": otel_reqs,
        "test": tests_reqs,
    },
    entry_points={"pytest11": ["sessh = sessh.pytest_plugin"]},
    zip_safe=False,
    keywords=about["__title__"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: MIT License",
        "Framework :: Pytest",
        "Operating System :: POSIX",
        "Operating System :: MacOS :: MacOS X",
        "Intended Audience :: Developers",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Utilities",
        "Topic :: System :: Shells",
        "Topic :: System :: Networking",
    ],
)
