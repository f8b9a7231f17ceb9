"""Package setup."""

import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

with open("requirements/base.txt") as f:
    required = f.read().splitlines()

with open("requirements/test.txt") as f:
    test_required = f.read().splitlines()

setuptools.setup(
    name="roialign",
    version="0.1.0",
    description="Single region RoIAlign pooling with a shared sampling plan",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=("tests", "tests.*", "docs.*")),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=required,
    extras_require={"test": test_required},
    package_data={
        "roialign": [
            "py.typed",
        ]
    },
    include_package_data=True,
)
