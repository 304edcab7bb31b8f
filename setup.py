from setuptools import setup, find_packages

setup(
    name="autofix",
    version="0.1.0",
    packages=find_packages(include=["autofix", "autofix.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml",
        # Import block scanning and post-edit syntax validation
        "tree-sitter>=0.22",
        "tree-sitter-java",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    author="Uday Kanth",
    description="Merges suggested source fixes into one conflict-free diff and applies it.",
)
