from sqlalchemy.orm import declarative_base

# Instancia base usada por los modelos
Base = declarative_base()
