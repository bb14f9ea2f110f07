"""회원/팀 ORM 학습 프로젝트 패키지.

Member/Team ORM study package.
Exercises derived queries, named queries, entity graphs, paging, locking,
native queries, projections, specifications and query-by-example on top of
SQLAlchemy's async ORM.
"""
