from pydantic import BaseModel, EmailStr, Field


class UserCreateIn(BaseModel):
    first_name: str = Field(..., description="Given name", min_length=1, max_length=100)
    last_name: str = Field("", description="Family name", max_length=100)
    email: EmailStr = Field(..., description="The email of the user", max_length=255)
    bio: str = Field("", description="Free-form profile text", max_length=1000)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., description="The password of the user", min_length=4, max_length=72)


class UserUpdateIn(BaseModel):
    id: int = Field(..., gt=0)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    email: EmailStr = Field(..., max_length=255)
    bio: str = Field("", max_length=1000)


class UserSessionIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class UserOtpIn(BaseModel):
    email: EmailStr
    otp: str = Field(..., min_length=4, max_length=10, pattern=r"^\d+$")


class OtpRequestIn(BaseModel):
    email: EmailStr
