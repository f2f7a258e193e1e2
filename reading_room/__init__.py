"""
Reading room core package.

A single EPUB book is parsed once into an immutable document store and
served to many readers at the same time. Readers share where they are in
the book through the position registry, which forgets anyone who has not
reported a position within the last ten seconds.
"""
