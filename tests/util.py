import glob
import os

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')


def package_relative_file(*paths):
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..', *paths))


def get_data(*paths):
    return os.path.join(DATA_DIR, *paths)


def glob_exists(*pos, strict=False, n=1):
    globexpr = os.path.join(*pos)
    file_list = glob.glob(globexpr)
    if strict and len(file_list) == n:
        return file_list[0] if len(file_list) == 1 else file_list
    elif not strict and len(file_list) > 0:
        return file_list
    else:
        print(globexpr)
        print(file_list)
        return False


def mock_file_content(*rows):
    """tab-delimited file content with a header built from the keys of the first row"""
    header = [c for c in rows[0]]
    lines = ['\t'.join(header)]
    for row in rows:
        lines.append('\t'.join([str(row[c]) for c in header]))
    return '\n'.join(lines) + '\n'
