"""Tokenize a SQL statement in 3 lines, zero config, zero deps."""

from dmlex import tokenize

for token in tokenize("select * from t where name = 'O''Brien'", skip_trivia=True):
    print(f"{token.lineno}:{token.col}\t{token.kind.name}\t{token.text!r}\t{token.value!r}")
