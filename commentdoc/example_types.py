from __future__ import annotations

from typing import List

from pydantic import BaseModel

# These types back the CLI examples and the tests; types declared inside test
# functions have no importable source module.


# A commented type
class MyType(BaseModel):
	# This field is a string with a manual comment
	myfield1: str = ""

	# This field is an integer array and also manually commented
	myfield2: List[int] = []

	# This field is of a custom type
	myfield3: MySecondType

	# This field is an array of the custom type
	myfield4: List[MySecondType] = []


# A second commented type, only reached through MyType's fields
class MySecondType(BaseModel):
	# This field is inside the second custom type
	mysecondfield1: int = 0


MyType.model_rebuild()
