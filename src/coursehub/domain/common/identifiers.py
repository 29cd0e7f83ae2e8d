from typing import NewType

# Opaque tokens, compare by equality only.
# Mongo backend: ObjectId hex, memory backend: counter as decimal string.
UserId = NewType("UserId", str)
CourseId = NewType("CourseId", str)
LessonId = NewType("LessonId", str)
EnrollmentId = NewType("EnrollmentId", str)
ReviewId = NewType("ReviewId", str)
