"""Shared pytest fixtures for all tests."""

from io import BytesIO
from pathlib import Path

import pytest

# A small mysqldump-style file, split into the blocks each table owns so tests
# can assemble the expected output of an extract.
HEADER = rb"""-- MySQL dump 10.13

/*!40101 SET NAMES utf8mb4 */;
SET FOREIGN_KEY_CHECKS=0;
"""

USERS = rb"""
--
-- Table structure for table `users`
--

DROP TABLE IF EXISTS `users`;
CREATE TABLE `users` (
  `id` int NOT NULL,
  `bio` text
);
LOCK TABLES `users` WRITE;
/*!40000 ALTER TABLE `users` DISABLE KEYS */;
INSERT INTO `users` VALUES (1,'a;b'),(2,'it''s'),(3,'back\\slash\'q');
/*!40000 ALTER TABLE `users` ENABLE KEYS */;
"""

UNLOCK = b"UNLOCK TABLES;\n"

ARCHIVE = rb"""DROP TABLE IF EXISTS `users_archive`;
CREATE TABLE `users_archive` (`id` int);
INSERT INTO `users_archive` VALUES (1);
"""

ORDERS = rb"""DROP TABLE IF EXISTS `orders`;
CREATE TABLE `orders` (`id` int, `note` varchar(20) DEFAULT '-- not a comment');
INSERT INTO `orders` VALUES (1,"x;y"),(2,'(paren)');
"""

FOOTER = b"-- Dump completed\n"

DUMP = HEADER + USERS + UNLOCK + ARCHIVE + ORDERS + FOOTER

MALFORMED = b"SELECT 1;\nINSERT INTO t VALUES ('unterminated"


@pytest.fixture
def dump_bytes() -> bytes:
    """The sample dump as bytes."""
    return DUMP


@pytest.fixture
def dump_stream() -> BytesIO:
    """The sample dump as a binary stream."""
    return BytesIO(DUMP)


@pytest.fixture
def dump_file(tmp_path: Path) -> Path:
    """The sample dump written to a temporary file."""
    path = tmp_path / "dump.sql"
    path.write_bytes(DUMP)
    return path


@pytest.fixture
def malformed_file(tmp_path: Path) -> Path:
    """A dump ending inside a string literal."""
    path = tmp_path / "broken.sql"
    path.write_bytes(MALFORMED)
    return path
