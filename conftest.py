# coding=utf-8
"""Marks the repository root as the pytest rootdir so that the cli package
is importable from the tests"""
