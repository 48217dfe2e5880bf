# markov/DB/schema.py
# Base tables plus an external-content FTS5 index over prefixes.
# The triggers keep the index in the same transaction as the base-row write.

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS prefixes (
      id INTEGER PRIMARY KEY,
      tuple TEXT NOT NULL,
      ord INTEGER NOT NULL,
      author TEXT NOT NULL,
      UNIQUE(tuple, author)
    );
    """,
    """
    CREATE VIRTUAL TABLE IF NOT EXISTS prefixes_idx USING fts5(
      tuple, author, content='prefixes', content_rowid='id'
    );
    """,
    """
    CREATE TRIGGER IF NOT EXISTS prefixes_ai AFTER INSERT ON prefixes BEGIN
      INSERT INTO prefixes_idx(rowid, tuple, author) VALUES (new.id, new.tuple, new.author);
    END;
    """,
    """
    CREATE TRIGGER IF NOT EXISTS prefixes_ad AFTER DELETE ON prefixes BEGIN
      INSERT INTO prefixes_idx(prefixes_idx, rowid, tuple, author)
      VALUES ('delete', old.id, old.tuple, old.author);
    END;
    """,
    """
    CREATE TRIGGER IF NOT EXISTS prefixes_au AFTER UPDATE ON prefixes BEGIN
      INSERT INTO prefixes_idx(prefixes_idx, rowid, tuple, author)
      VALUES ('delete', old.id, old.tuple, old.author);
      INSERT INTO prefixes_idx(rowid, tuple, author) VALUES (new.id, new.tuple, new.author);
    END;
    """,
    """
    CREATE TABLE IF NOT EXISTS suffixes (
      id INTEGER PRIMARY KEY,
      prefix_id INTEGER NOT NULL REFERENCES prefixes(id),
      word TEXT NOT NULL,
      count INTEGER NOT NULL DEFAULT 1,
      UNIQUE(prefix_id, word)
    );
    """,
]
