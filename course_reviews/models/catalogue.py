"""Course and Professor ORM models — the catalogue reviews are written against."""

from sqlalchemy import Column, Integer, Text
from sqlalchemy.orm import relationship

from course_reviews.database import Base


class Course(Base):
    """A course identified by its numeric catalogue code (e.g. 101)."""

    __tablename__ = "courses"

    code = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(Text, nullable=False)

    reviews = relationship("Review", back_populates="course")


class Professor(Base):
    """
    A professor. Names are stored uppercased by the catalogue ingest;
    lookups compare case-insensitively regardless.
    """

    __tablename__ = "professors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(Text, nullable=True)
    last_name = Column(Text, nullable=False, index=True)

    reviews = relationship("Review", back_populates="professor")
