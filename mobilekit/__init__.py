"""
mobilekit - cross-compilation environments for mobile targets.

Resolves the Android NDK and Xcode toolchains for every supported target and
produces the environment overrides needed to build native code for it.
"""

__version__ = "0.1.0"
