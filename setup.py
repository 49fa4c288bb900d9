from setuptools import setup, find_packages

setup(
    name="tinypaste",
    version="1.0.0",
    description="A minimal pastebin with syntax highlighting for browsers",
    packages=find_packages(include=["tinypaste", "tinypaste.*"]),
    python_requires=">=3.10",
    install_requires=[
        "flask>=3.0.0",
        "werkzeug>=3.0.0",
        "pygments>=2.17.0",
        "tomli>=2.0.0; python_version < '3.11'",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "hypothesis>=6.92.1",
        ],
    },
)
