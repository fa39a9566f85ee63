from setuptools import find_packages, setup

setup(
    name="bpt-bearer-auth",
    version="1.0.0",
    description="Signed bearer token issuance, permission claims and revocation store for BPT python services",
    author="BPT Team",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        # Token dependencies
        "pyjwt>=2.8.0",
        # Password hashing dependencies
        "argon2-cffi>=23.1.0",
        # Revocation store dependencies
        "redis>=5.0.1",
        # Logging dependencies
        "structlog>=23.2.0",
        "python-json-logger>=2.0.7",
        # Config dependencies
        "pydantic>=2.10.0",
        "pydantic-settings>=2.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23.0",
            "cryptography>=41.0.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
    ],
)
