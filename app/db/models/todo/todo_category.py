from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from app.db.session import Base

class TodoCategory(Base):
    __tablename__ = "todo_categories"

    todo_id = Column(Integer, ForeignKey("todos.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True)

    # Relationships
    todo = relationship("Todo", back_populates="todo_categories")
    category = relationship("Category", back_populates="todos")
