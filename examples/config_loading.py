"""config_loading.py"""
import sys

from clauseflags import Program, loader

root = loader("datatool.yaml")

if __name__ == "__main__":
    sys.exit(Program(root).run())
