#!/usr/bin/env python3
"""
APOD Background - Main entry point

This is a simple launcher that runs the apodbg package as a module.
All application code is in the apodbg/ directory.
"""

if __name__ == "__main__":
    import runpy

    # Run the apodbg package as a module
    runpy.run_module("apodbg", run_name="__main__")
