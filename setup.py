from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as fh:
    long_description = fh.read()
with open("sillycode/semver.txt", encoding="utf-8") as fh:
    semver = fh.read().strip()
with open("requirements.txt", encoding="utf-8") as fh:
    install_requires = [x.strip() for x in fh.read().strip().split("\n") if len(x) and x[0].isalpha()]

setup(
    name="sillycode",
    version=semver,
    description="Parses sillycode bracket-tag markup and renders it as HTML.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["sillycode", "sillycode.*"]),
    package_data={"sillycode": ["semver.txt"]},
    include_package_data=True,
    install_requires=install_requires,
    extras_require={"test": ["pytest>=7"]},
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.9",
        "Topic :: Text Processing :: Markup :: HTML",
    ],
    entry_points={"console_scripts": ["sillycode = sillycode:main"]},
)
