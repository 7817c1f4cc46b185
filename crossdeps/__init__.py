"""
crossdeps - reproducible cross-target build-environment resolver.

Maps a target triple and a set of native library names to the packages a
multi-arch package manager must install and the environment a cross
compiler driver must see.
"""
