"""Chaincode repository - time-stamped tokens handed out to users."""
from .base import Repository, new_id, utc_now


class ChaincodeRepository(Repository):

    def create(self, user_id: str) -> str:
        """Store a chaincode for a user.

        Returns:
            The chaincode (document ID)
        """
        chaincode = new_id()
        self._execute(
            "INSERT INTO chaincodes (id, user_id, timestamp) VALUES (?, ?, ?)",
            (chaincode, user_id, utc_now())
        )
        self._commit()
        return chaincode

    def get_by_id(self, chaincode: str) -> dict | None:
        cursor = self._execute("SELECT * FROM chaincodes WHERE id = ?", (chaincode,))
        row = self._row_to_dict(cursor.fetchone())
        if row is None:
            return None
        return {"id": row["id"], "userId": row["user_id"], "timestamp": row["timestamp"]}
