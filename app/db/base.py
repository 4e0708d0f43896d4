from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Note: Models import Base from this module; app.db.models registers them all
