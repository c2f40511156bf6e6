from setuptools import find_namespace_packages, setup

# bucketpath is a namespace package; only the core distribution lives here
packages = find_namespace_packages(where="../..", include=["bucketpath.core", "bucketpath.core.*"])

setup(
    name="bucketpath-core",
    packages=packages,
    package_dir={"": "../.."},
)
