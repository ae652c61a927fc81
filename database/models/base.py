from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Fixed vector size for every stored embedding (text-embedding-3-small)
EMBEDDING_DIMENSIONS = 1536
