"""Example usage of the literal_tables library."""

from literal_tables import Engine, SQLError, format_rows

engine = Engine()

# Column types and constraints are recorded but not enforced
print(engine.evaluate("CREATE TABLE person(id INTEGER PRIMARY KEY, name TEXT, age)").message)

result = engine.evaluate("""
    INSERT INTO person VALUES
        (1, 'Alice', 30),
        (2, 'Bob', 25.5),
        (3, 'Charlie', NULL),
        (4, X'44', CURRENT_DATE)
""")
print(result.message)

# Rows come back in insertion order
result = engine.evaluate("SELECT * FROM person")
print(format_rows(result.rows))

# Anything outside the supported subset is rejected before it runs
for sql in (
    "SELECT name FROM person",
    "SELECT * FROM person WHERE age > 26",
    "INSERT INTO person VALUES (5, 'Eve', 1 + 1)",
    "DELETE FROM person",
    "SELECT * FROM nobody",
):
    try:
        engine.evaluate(sql)
    except SQLError as e:
        print(f"{sql}\n  -> {type(e).__name__}: {e}")

print(f"\n{len(engine.evaluate('SELECT * FROM person').rows)} rows left in person")
