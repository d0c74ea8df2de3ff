from setuptools import setup, find_packages

setup(
    name="dbgview",
    author="dbgview contributors",
    description="Print any value beside the expression that produced it, for debugging",
    long_description=open("README.md", encoding="UTF-8").read(),
    long_description_content_type="text/markdown",
    use_scm_version={"fallback_version": "0.1.0"},
    setup_requires = ["setuptools_scm"],
    packages=find_packages(include=["dbgview", "dbgview.*"]),
    package_data={"dbgview": ["style.css"]},
    python_requires=">=3.10",
    classifiers = [
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    install_requires = ["html5tagger>=1.2.1"],
    extras_require = {
        "test": ["pytest", "coverage", "beautifulsoup4", "numpy"],
    },
    include_package_data = True,
)
