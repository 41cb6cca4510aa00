import os

BASE_PATH = os.path.abspath(os.path.dirname(__file__))


def full_path(*path):
    return os.path.join(BASE_PATH, 'data', *path)


def read_file(*path):
    with open(full_path(*path)) as fp:
        return fp.read()
