from functools import reduce


def pipe(*funcs):
    """pipe(f, g, h)(x) == h(g(f(x))); pipe()(x) == x"""
    return reduce(lambda f, g: lambda x: g(f(x)), funcs, lambda x: x)
