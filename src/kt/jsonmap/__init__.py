"""\
Mapping of JSON token streams onto application value objects.

"""
