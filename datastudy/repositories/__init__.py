"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer.
Each repository extends BaseRepository for generic CRUD, paging,
specification and query-by-example execution, and adds entity-specific
queries (derived, named, declared, native, projection).
"""
