import orjson


def dumps(o) -> str:
    return orjson.dumps(o).decode()


def loads(s):
    return orjson.loads(s)
