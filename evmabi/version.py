version = "0.2.0"
version_tuple = tuple(int(part) for part in version.split("."))
