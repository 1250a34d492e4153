# coursehub/models/course_content.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from coursehub.core.database import Base


class CourseContent(Base):
    __tablename__ = "course_contents"

    id = Column(Integer, primary_key=True, index=True)

    # Course relationship
    course_id = Column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(255), nullable=False)

    # Content Type: video, text, quiz
    type = Column(String(20), nullable=False, index=True)

    # Video URL, markdown body or serialized quiz
    content = Column(Text, nullable=True)

    duration = Column(Integer, nullable=True)  # Minutes

    # Position in course, ascending
    order = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self):
        return f"<CourseContent(id={self.id}, type='{self.type}', course_id={self.course_id})>"
