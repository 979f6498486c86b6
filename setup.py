from setuptools import find_packages, setup

setup(
    name="hostquery",
    version="0.1.0",
    packages=find_packages(include=["hostquery", "hostquery.*"]),
    python_requires=">=3.9",
    install_requires=["python-dotenv>=1.0"],
    extras_require={"test": ["pytest>=7"]},
)
