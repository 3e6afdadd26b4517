"""componenttk package setup.

Configuration:
    - License: MIT
    - Runtime deps: requirements.txt
"""

import re
import setuptools
from pathlib import Path

# =============================================================================
# Package metadata (extracted without importing the package)
# =============================================================================

HERE = Path(__file__).parent.resolve()
PACKAGE = "componenttk"

# Read version from __init__.py
_init = (HERE / PACKAGE / "__init__.py").read_text(encoding="utf-8")
VERSION = re.search(r'__version__\s*=\s*["\']([^"\']+)["\']', _init).group(1)

# Read README
README = (HERE / "docs" / "README.md").read_text(encoding="utf-8")

# Extract short description from README markers
_desc_match = re.search(
    r"<!-- short_description_start -->(.+?)<!-- short_description_end -->",
    README,
    re.DOTALL,
)
DESCRIPTION = (
    _desc_match.group(1).strip() if _desc_match else "Component integrity toolkit"
)

REQUIREMENTS = [
    line.strip()
    for line in (HERE / "requirements.txt").read_text().splitlines()
    if line.strip() and not line.startswith("#")
]

# =============================================================================
# Setup
# =============================================================================

setuptools.setup(
    name=PACKAGE,
    version=VERSION,
    description=DESCRIPTION,
    long_description=README,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    packages=setuptools.find_packages(exclude=["test", "test.*"]),
    include_package_data=True,
    install_requires=REQUIREMENTS,
    extras_require={"test": ["pytest"]},
)
